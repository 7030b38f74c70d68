import sys

from .run_tests import main

sys.exit(main())
