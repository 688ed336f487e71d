import sys

from waitlimit.cli import main

sys.exit(main())
