"""Allow ``python -m skirmish``."""

from skirmish.app import main


raise SystemExit(main())
