import sys

from tslgen.cli import main

sys.exit(main())
