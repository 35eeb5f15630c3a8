# web.py

import logging
import os

from flask import Flask, render_template

from summary import WalletSummary

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")


def create_app(list_wallets, report_path: str = "/") -> Flask:
    """
    Build the report app.

    `list_wallets` is a zero-argument callable returning the stored wallet
    records, primary group first.
    """
    app = Flask("NightWatcher", template_folder=TEMPLATE_DIR)

    @app.route(report_path, methods=["GET"])
    def index():
        wallets = list_wallets()
        logger.debug("Rendering report for %d wallets", len(wallets))
        return render_template("index.html", **WalletSummary(wallets).as_context())

    return app


def run_web(app: Flask, host: str, port: int):
    logger.info("Report page listening on %s:%s", host, port)
    app.run(host=host, port=port, threaded=True, use_reloader=False)
