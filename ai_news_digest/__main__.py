"""Allow ``python -m ai_news_digest``."""

import sys

from .cli import main

sys.exit(main())
