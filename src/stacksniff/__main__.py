import sys

from stacksniff.cli import main

sys.exit(main())
