from avbuild.cli import main

main()
