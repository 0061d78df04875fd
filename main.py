from rich.pretty import pprint

from argbind import *

__prog__ = "copier"

verbose = Argument("-v", "--verbose", descr="print every copied file")
output = Argument("-o", "--output", arity=Arity.SINGLE, defaults=["out"])
files = Argument("-f", "--files", arity=Arity.MULTIPLE, mandatory=True)


if __name__ == '__main__':
    arguments = parse((verbose, output, files), shell=True, fancy=True)
    pprint(arguments)
    pprint({"output": arguments.parameter(output), "files": arguments.parameters(files)})
