import sys

from propsync.cli import main

sys.exit(main())
