import sys

from skyalchemy.cli import main

sys.exit(main())
