import sys

from backend_scaffold.foundry import main

sys.exit(main())
