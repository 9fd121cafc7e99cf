import sys

from zipwalk.interface.cli.app import main

sys.exit(main())
