from questrunner.main import main

raise SystemExit(main())
