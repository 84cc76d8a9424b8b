import os

from dotenv import load_dotenv

dotenv_path = os.getenv('SPORTSNEWS_DOTENV', '.env')
load_dotenv(dotenv_path)

from app import app  # noqa: E402

if __name__ == '__main__':
    # Set default host and port
    host = os.getenv('HOST', '127.0.0.1')
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('DEBUG', 'False').lower() == 'true'

    print(f"Starting sports news service on {host}:{port}")
    print(f"Access URL: http://{host}:{port}/news")

    app.run(host=host, port=port, debug=debug, threaded=True)
