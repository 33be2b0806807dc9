"""Interactive uploader that sends local files to the relay."""

import os
from collections.abc import Callable
from typing import BinaryIO

import httpx
import typer

from ipfs_relay.multipart import encode_file_field

PROMPT = "Enter the path of the image file (or 'exit' to quit): "
EXIT_COMMAND = "exit"


def send_file(client: httpx.Client, relay_url: str, filename: str, handle: BinaryIO) -> str:
    """POST one open file to the relay and return the raw response body."""
    body, body_type = encode_file_field("file", filename, handle.read())
    response = client.post(f"{relay_url}/upload", content=body, headers={"Content-Type": body_type})
    return response.text


def run_uploader(
    relay_url: str,
    *,
    timeout_s: float | None = None,
    read_line: Callable[[str], str] = input,
    echo: Callable[[str], None] = typer.echo,
    client: httpx.Client | None = None,
) -> None:
    """Prompt for paths and upload each one until ``exit`` or end of input.

    Failures are printed and the prompt is shown again. The response body is
    printed as received.
    """
    owned = client is None
    if client is None:
        client = httpx.Client(timeout=timeout_s)
    try:
        while True:
            try:
                path = read_line(PROMPT).strip()
            except EOFError:
                echo("")
                break
            if path == EXIT_COMMAND:
                echo("Exiting CLI uploader.")
                break

            try:
                handle = open(path, "rb")
            except OSError as exc:
                echo(f"Error opening file: {exc}")
                continue

            with handle:
                try:
                    body = send_file(client, relay_url, os.path.basename(path), handle)
                except (OSError, httpx.HTTPError, httpx.InvalidURL) as exc:
                    echo(f"Upload failed: {exc}")
                    continue

            echo(f"Response from server: {body}")
    finally:
        if owned:
            client.close()
