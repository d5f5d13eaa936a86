import sys

from addonpacker.cli import main

sys.exit(main())
