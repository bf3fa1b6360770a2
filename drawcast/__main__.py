import sys

from drawcast.cli import main

sys.exit(main())
