import sys

from chartcore.main import main

sys.exit(main())
