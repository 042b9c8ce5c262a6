APP_NAME = "eonet-events-api"
APP_VERSION = "0.1.0"
