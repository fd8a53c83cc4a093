"""Localized strings for rendered digests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class Language(str, Enum):
    EN = "en"
    ZH_TW = "zh-TW"
    ZH_CN = "zh-CN"
    JA = "ja"

    @classmethod
    def resolve(cls, code: Optional[str]) -> "Language":
        """Return the matching language, or English for unknown codes."""
        for language in cls:
            if language.value == code:
                return language
        return cls.EN


@dataclass(frozen=True)
class Labels:
    title: str
    generated_at: str
    period: str
    day: str
    days: str
    blog_posts: str
    releases: str
    trending: str
    no_news: str
    read_more: str
    summary: str
    quick_links: str
    powered_by: str


LABELS: Mapping[Language, Labels] = {
    Language.EN: Labels(
        title="AI News Digest",
        generated_at="Generated at",
        period="Period: Last",
        day="day",
        days="days",
        blog_posts="Blog Posts & Announcements",
        releases="GitHub Releases",
        trending="Trending Projects",
        no_news="No new items found for this period.",
        read_more="Read more",
        summary="Summary",
        quick_links="Quick Links",
        powered_by="Powered by ai-news-digest",
    ),
    Language.ZH_TW: Labels(
        title="AI 新聞日報",
        generated_at="生成時間",
        period="期間：最近",
        day="天",
        days="天",
        blog_posts="部落格文章與公告",
        releases="GitHub 版本更新",
        trending="熱門專案",
        no_news="此期間未找到新項目。",
        read_more="閱讀更多",
        summary="摘要",
        quick_links="快速連結",
        powered_by="由 ai-news-digest 提供",
    ),
    Language.ZH_CN: Labels(
        title="AI 新闻日报",
        generated_at="生成时间",
        period="期间：最近",
        day="天",
        days="天",
        blog_posts="博客文章与公告",
        releases="GitHub 版本更新",
        trending="热门项目",
        no_news="此期间未找到新项目。",
        read_more="阅读更多",
        summary="摘要",
        quick_links="快速链接",
        powered_by="由 ai-news-digest 提供",
    ),
    Language.JA: Labels(
        title="AIニュースダイジェスト",
        generated_at="生成日時",
        period="期間：直近",
        day="日間",
        days="日間",
        blog_posts="ブログ記事＆アナウンス",
        releases="GitHub リリース",
        trending="トレンドプロジェクト",
        no_news="この期間の新しい項目は見つかりませんでした。",
        read_more="続きを読む",
        summary="要約",
        quick_links="クイックリンク",
        powered_by="ai-news-digest 提供",
    ),
}


def get_labels(lang: Optional[str]) -> Labels:
    return LABELS[Language.resolve(lang)]
