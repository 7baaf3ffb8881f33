import os

# Settings are read at import time, so these must be in place before the
# application modules are first imported.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("EMAIL_DELAY_SECONDS", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")
