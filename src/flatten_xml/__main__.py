from flatten_xml.cli import main

raise SystemExit(main())
