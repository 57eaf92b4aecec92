import sys

from gasoline.cli._dispatcher import main

sys.exit(main())
