"""
Command line interface for minissdpc.

Example when used as a cli:

.. code:: bash

    # show the help
    minissdpc --help

    # list every service advertised by minissdpd
    minissdpc ls
    # list the services of a given type, or with a given unique service name
    minissdpc ls type urn:schemas-upnp-org:device:MediaServer:1
    minissdpc ls usn uuid:0000-0000-0000-0001

    # ask minissdpd to advertise a new service
    minissdpc register -t urn:Dummy:device:controllee:1 -u 1234 \\
        -s "Dummy 1.0" -l http://127.0.0.1/setup.xml

    # talk to a daemon on another socket
    minissdpc --socket /tmp/minissdpd.sock ls

"""

import argparse
import logging
import sys
import textwrap
from typing import Iterable

from rich.logging import RichHandler

from minissdpc.client import Client, DEFAULT_SOCKET
from minissdpc.errors import MinissdpError
from minissdpc.service import Service

EXIT_SUCCESS = 0
EXIT_FAILURE = 2
EXIT_USAGE = 3

LIST_ACTIONS = {
    None: "list all services",
    "type": "get services by type",
    "usn": "get services by usn",
}


def handle_user_arguments(args=None) -> argparse.Namespace:
    """
    Parse the arguments from the command line.

    :return: The namespace of arguments read from the command line.
    """
    description = textwrap.dedent(
        """\
    A client to interact with minissdpd on its Unix socket.
    """
    )
    parser = argparse.ArgumentParser(prog="minissdpc", description=description)
    parser.add_argument(
        "--socket",
        default=DEFAULT_SOCKET,
        metavar="PATH",
        help=f"minissdpd's Unix socket path (default: {DEFAULT_SOCKET})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log the exchanges with minissdpd.",
    )
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    register = commands.add_parser(
        "register", help="Register a new service for minissdpd to advertise."
    )
    register.add_argument("-t", "--type", default="", help="SSDP service/device type.")
    register.add_argument("-u", "--usn", default="", help="SSDP unique service name.")
    register.add_argument(
        "-s", "--server", default="", help="SSDP server identifier string."
    )
    register.add_argument(
        "-l", "--location", default="", help="URL of the service being advertised."
    )
    register.set_defaults(run=run_register)

    ls = commands.add_parser(
        "ls", help="List services currently advertised by minissdpd."
    )
    ls.set_defaults(run=run_list, service_filter=None)
    filters = ls.add_subparsers(dest="filter_by", metavar="FILTER")

    by_type = filters.add_parser("type", help="Filter services that match a type.")
    by_type.add_argument("service_filter", metavar="TYPE")

    by_usn = filters.add_parser(
        "usn", help="Filter services that match a unique service name."
    )
    by_usn.add_argument("service_filter", metavar="USN")

    arguments = parser.parse_args(args)
    return arguments


def run_register(client: Client, arguments: argparse.Namespace) -> int:
    service = Service(
        type=arguments.type,
        usn=arguments.usn,
        server=arguments.server,
        location=arguments.location,
    )
    if not all((service.type, service.usn, service.server, service.location)):
        print(
            "All fields must be provided to register a new service, see help for fields",
            file=sys.stderr,
        )
        return EXIT_USAGE

    with client:
        try:
            client.register_service(service)
        except (MinissdpError, EOFError) as e:
            print(f"could not register new service: {e}", file=sys.stderr)
            return EXIT_FAILURE

    print(f"service {service.usn} successfully registered")
    return EXIT_SUCCESS


def run_list(client: Client, arguments: argparse.Namespace) -> int:
    with client:
        try:
            match arguments.filter_by:
                case "type":
                    services = client.get_services_by_type(arguments.service_filter)
                case "usn":
                    services = client.get_services_by_usn(arguments.service_filter)
                case _:
                    services = client.get_services_all()
        except (MinissdpError, EOFError) as e:
            action = LIST_ACTIONS[arguments.filter_by]
            print(f"could not {action}: {e}", file=sys.stderr)
            return EXIT_FAILURE

    print_services(services)
    return EXIT_SUCCESS


def print_services(services: Iterable[Service]):
    services = list(services)
    if not services:
        print("No matching services returned")
        return
    for service in services:
        print(f"Type: {service.type}")
        print(f"USN: {service.usn}")
        print(f"Location: {service.location}\n")


def main(args=None) -> int:
    """
    Entry point for the command line.
    """
    arguments = handle_user_arguments(args)

    logging.basicConfig(
        level=logging.DEBUG if arguments.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logging.captureWarnings(True)

    client = Client(arguments.socket)
    try:
        return arguments.run(client, arguments)
    except MinissdpError as e:
        print(f"could not connect to minissdpd: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
