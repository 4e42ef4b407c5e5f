from colorama import init, Fore, Style

from flask_log_server import record_log, set_wallet_status

init(autoreset=True)


class Colors:
    banner = Fore.LIGHTYELLOW_EX
    tag = Fore.CYAN
    bold = Style.BRIGHT
    reset = Style.RESET_ALL


LEVEL_COLORS = {
    "info": Fore.GREEN,
    "warn": Fore.YELLOW,
    "error": Fore.RED,
}


class WalletLogger:
    """Log sink bound to one wallet, or to the runner itself.

    Lines are printed with a colored level. Wallet loggers also mirror them
    into the log viewer's buffer under ``tag``; the runner logger passes
    ``viewer=False`` so it never shows up as a wallet card.
    """

    def __init__(self, tag: str, viewer: bool = True):
        self.tag = tag
        self.viewer = viewer

    def _emit(self, level, msg):
        line = f"[{level.upper()}] {msg}"
        if self.viewer:
            record_log(self.tag, line)
        print(f"{Colors.tag}[{self.tag[:8]}]{Colors.reset} {LEVEL_COLORS[level]}{line}")

    def info(self, msg):
        self._emit("info", msg)

    def warn(self, msg):
        self._emit("warn", msg)

    def error(self, msg):
        self._emit("error", msg)

    def stage(self, name):
        if self.viewer:
            set_wallet_status(self.tag, name)
