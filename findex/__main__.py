from findex.main import main

main()
