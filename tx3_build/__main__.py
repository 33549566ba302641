import sys
from tx3_build.cli import main

sys.exit(main())
