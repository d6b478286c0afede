from pkgfetch.cli import main

main()
