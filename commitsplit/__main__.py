import sys

from commitsplit.cli import main

sys.exit(main())
