import sys

from bike_demand.pipeline import main

sys.exit(main())
