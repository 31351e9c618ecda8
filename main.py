from rich.pretty import pprint

from flexibility import *


class Banner(Flexible):
    def __init__(self):
        self.width = 40

    @operation(
        message=[required(), validate(lambda self, message: isinstance(message, str)), transform(lambda self, message: message.upper())],
        width=[default(factory=lambda self: self.width), validate(lambda self, width: 0 <= width)],
        symbol=default("*"),
    )
    def show(self, message, width, symbol, options):
        width = max(width, len(message) + 4)
        return "\n".join((
            symbol * width,
            f"{symbol} {message.ljust(width - 4)} {symbol}",
            symbol * width,
        ))


if __name__ == '__main__':
    banner = Banner()
    pprint(Banner.show)
    print(banner.show("hello world!", 20, "#"))
    print(banner.show("a-ha", symbol="-", width=15))
