from azure_blob_sas.cli.main import main

main()
