import sys

from treemason.main import main

sys.exit(main())
