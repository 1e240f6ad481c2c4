"""Dev entry point: python -m notification_dispatch."""
from notification_dispatch.api.app import build_app
from notification_dispatch.config import ApiConfig


def main() -> None:
    config = ApiConfig()
    app = build_app(config)
    app.run(host=config.host, port=config.port, threaded=True)


if __name__ == "__main__":
    main()
