import logging

from etlaq.bridge import create_bridge_app

logging.basicConfig(level=logging.INFO, format='[%(asctime)s] %(levelname)s in %(module)s: %(message)s')

app = create_bridge_app()

if __name__ == '__main__':
    app.logger.info("React-grab bridge running on port %s", app.config['BRIDGE_PORT'])
    app.logger.info("Studio API: %s", app.config['STUDIO_API_URL'])
    app.logger.info("Chat ID: %s", 'configured' if app.config['STUDIO_CHAT_ID'] else 'missing')
    app.run(
        host=app.config['BRIDGE_HOST'],
        port=app.config['BRIDGE_PORT'],
        debug=False,
        threaded=True
    )
