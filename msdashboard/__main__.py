import sys

from msdashboard.cli import main

sys.exit(main())
