import sys

from codex.cli.main import main

sys.exit(main())
