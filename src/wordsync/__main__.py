import sys

from wordsync.cli import main

sys.exit(main())
