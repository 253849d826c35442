import sys

from portal_linker.cli import main

sys.exit(main())
