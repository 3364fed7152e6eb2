from npm_buttons.ui.logger import CHANNEL_NAME, ChannelFormatter, OutputChannelHandler, configure_logging
from npm_buttons.ui.output import OutputRouter, UIEvent, UIEventLevel, get_output_router, proxy_print

__all__ = [
    "CHANNEL_NAME",
    "ChannelFormatter",
    "OutputChannelHandler",
    "OutputRouter",
    "UIEvent",
    "UIEventLevel",
    "configure_logging",
    "get_output_router",
    "proxy_print",
]
