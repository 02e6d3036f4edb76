from bulkorder.api.api_server import run

if __name__ == "__main__":
    run()
