import sys

from resolver.main import main

sys.exit(main())
