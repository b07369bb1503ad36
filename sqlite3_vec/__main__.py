from sqlite3_vec.cli import main

if __name__ == "__main__":
    main()
