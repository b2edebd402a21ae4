import os
from repairdesk import create_app
from config import get_config, print_config_summary

# Create app instance with appropriate config
config = get_config()
app = create_app(config)

if __name__ == '__main__':
    print_config_summary()

    port = int(os.environ.get('PORT', 5000))
    host = os.environ.get('HOST', '0.0.0.0')

    # Threaded so live streams do not block other requests
    print(f"Starting {app.config['SHOP_NAME']} on http://{host}:{port}")
    app.run(host=host, port=port, debug=app.config['DEBUG'], threaded=True)
