import sys

from jsonstream.cli import main

sys.exit(main())
