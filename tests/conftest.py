"""Root conftest: sets env vars BEFORE any faqbot module is imported.

The config.py module-level singleton requires TELEGRAM_BOT_TOKEN at import
time, so it must be set before pytest discovers any test that transitively
imports faqbot.config.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["TELEGRAM_BOT_TOKEN"] = "test:0000000000:AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
os.environ["FAQBOT_DIR"] = tempfile.mkdtemp(prefix="faqbot-test-")
