from root_api.server import main

if __name__ == "__main__":
    # Run the app when called as a module
    main()
