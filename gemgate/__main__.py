import sys

from gemgate.proxy import main

sys.exit(main())
