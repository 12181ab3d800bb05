"""Allow ``python -m argsense``."""

from .main import main

raise SystemExit(main())
