"""
Run the WasteChain API locally.

Seeds the demo bins on first start and, unless SIMULATION_AUTOSTART is
off, starts the IoT simulation.
"""

import logging

from wastechain import create_app
from wastechain.config import Config

logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

app = create_app()

if __name__ == '__main__':
    # The reloader would start a second simulation scheduler
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
