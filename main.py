import sys

from rich.console import Console
from rich.pretty import pprint

from cmdargs import *

__prog__ = "cmdargs-demo"

parser = ArgParser()
helpflag = parser.add(FlagArg, "h", "help", "prints this help message")
val1 = parser.add(ValueArg, "", "val1", "value argument 1", 3.14)
val2 = parser.add(ValueArg, "", "val2", "value argument 2")
imp1 = parser.add(ImplicitArg, "", "imp1", "implicit argument 1", 10)
imp2 = parser.add(ImplicitArg, "", "imp2", "implicit argument 2", 20)
flag1 = parser.add(FlagArg, "", "flag1", "flag argument 1")
flag2 = parser.add(FlagArg, "", "flag2", "flag argument 2", visibility=Visibility.HIDDEN)


if __name__ == '__main__':
    try:
        parser.parse(sys.argv)
    except ArgumentException as fault:
        Console(stderr=True).print(fault)
        sys.exit(2)

    if helpflag.value:
        parser.printhelp(hidden=True)
    else:
        pprint({argument.label: argument.value for argument in parser})
