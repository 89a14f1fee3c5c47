import sys

from pmdock.main import main

sys.exit(main())
