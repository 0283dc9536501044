from schema_registry_helper.cli import main

if __name__ == "__main__":
    main()
