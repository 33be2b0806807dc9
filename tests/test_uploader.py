import builtins
from pathlib import Path

import httpx

from ipfs_relay.uploader import PROMPT, run_uploader


def _scripted(lines: list[str]):
    prompts: list[str] = []
    remaining = iter(lines)

    def read_line(prompt: str) -> str:
        prompts.append(prompt)
        return next(remaining)

    return read_line, prompts


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_exit_stops_without_any_request() -> None:
    calls: list[httpx.Request] = []
    read_line, prompts = _scripted(["  exit  "])
    output: list[str] = []

    run_uploader(
        "http://localhost:3000",
        read_line=read_line,
        echo=output.append,
        client=_client(lambda request: calls.append(request) or httpx.Response(200)),
    )

    assert calls == []
    assert prompts == [PROMPT]
    assert output == ["Exiting CLI uploader."]


def test_end_of_input_stops_loop() -> None:
    def read_line(prompt: str) -> str:
        raise EOFError

    output: list[str] = []
    run_uploader(
        "http://localhost:3000",
        read_line=read_line,
        echo=output.append,
        client=_client(lambda request: httpx.Response(200)),
    )

    assert output == [""]


def test_missing_path_reports_error_and_prompts_again(tmp_path: Path) -> None:
    calls: list[httpx.Request] = []
    read_line, prompts = _scripted([str(tmp_path / "missing.png"), "exit"])
    output: list[str] = []

    run_uploader(
        "http://localhost:3000",
        read_line=read_line,
        echo=output.append,
        client=_client(lambda request: calls.append(request) or httpx.Response(200)),
    )

    assert calls == []
    assert len(prompts) == 2
    assert output[0].startswith("Error opening file: ")
    assert "missing.png" in output[0]
    assert output[1] == "Exiting CLI uploader."


def test_upload_posts_base_name_and_prints_body_verbatim(tmp_path: Path) -> None:
    image = tmp_path / "scan 01.png"
    image.write_bytes(b"\x89PNGdata")
    seen: list[httpx.Request] = []
    body = '{"ipfs_url":"https://ipfs.io/ipfs/Qm1"}'

    def relay(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=body)

    read_line, _ = _scripted([f"  {image}\n", "exit"])
    output: list[str] = []

    run_uploader("http://relay.test", read_line=read_line, echo=output.append, client=_client(relay))

    assert str(seen[0].url) == "http://relay.test/upload"
    assert b'name="file"; filename="scan 01.png"' in seen[0].content
    assert b"\x89PNGdata" in seen[0].content
    assert str(tmp_path).encode() not in seen[0].content
    assert output == [f"Response from server: {body}", "Exiting CLI uploader."]


def test_error_responses_are_printed_not_interpreted(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"x")
    read_line, _ = _scripted([str(image), "exit"])
    output: list[str] = []

    run_uploader(
        "http://relay.test",
        read_line=read_line,
        echo=output.append,
        client=_client(lambda request: httpx.Response(500, text='{"error":"pinata error: boom"}')),
    )

    assert output[0] == 'Response from server: {"error":"pinata error: boom"}'


def test_network_failure_is_reported_and_loop_continues(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"x")
    attempts: list[httpx.Request] = []

    def relay(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text="ok")

    read_line, prompts = _scripted([str(image), str(image), "exit"])
    output: list[str] = []

    run_uploader("http://relay.test", read_line=read_line, echo=output.append, client=_client(relay))

    assert len(prompts) == 3
    assert output == [
        "Upload failed: connection refused",
        "Response from server: ok",
        "Exiting CLI uploader.",
    ]


def test_uploader_round_trip_through_relay(tmp_path: Path, relay_client) -> None:
    image = tmp_path / "cat picture.jpg"
    image.write_bytes(b"meow")
    pinned: list[httpx.Request] = []

    def pinata(request: httpx.Request) -> httpx.Response:
        pinned.append(request)
        return httpx.Response(200, json={"IpfsHash": "Qm123"})

    read_line, _ = _scripted([str(image), "exit"])
    output: list[str] = []

    with relay_client(pinata) as client:
        run_uploader("http://testserver", read_line=read_line, echo=output.append, client=client)

    assert b'filename="cat picture.jpg"' in pinned[0].content
    assert b"meow" in pinned[0].content
    assert output[0].startswith("Response from server: ")
    assert '"ipfs_url":"https://ipfs.io/ipfs/Qm123"' in output[0]


def test_local_file_is_closed_before_next_prompt(tmp_path: Path, monkeypatch) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"x")
    opened = []
    real_open = builtins.open

    def _tracking_open(*args, **kwargs):
        handle = real_open(*args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr("ipfs_relay.uploader.open", _tracking_open, raising=False)

    attempts: list[httpx.Request] = []

    def relay(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text="ok")

    lines = iter([str(image), str(image), "exit"])
    closed_at_prompt: list[list[bool]] = []

    def read_line(prompt: str) -> str:
        closed_at_prompt.append([handle.closed for handle in opened])
        return next(lines)

    run_uploader("http://relay.test", read_line=read_line, echo=lambda _: None, client=_client(relay))

    assert closed_at_prompt == [[], [True], [True, True]]


def test_invalid_relay_url_is_reported_and_loop_continues(tmp_path: Path) -> None:
    image = tmp_path / "a.png"
    image.write_bytes(b"x")
    read_line, prompts = _scripted([str(image), "exit"])
    output: list[str] = []

    run_uploader(
        "http://localhost:notaport",
        read_line=read_line,
        echo=output.append,
        client=_client(lambda request: httpx.Response(200, text="ok")),
    )

    assert len(prompts) == 2
    assert output[0].startswith("Upload failed: ")
    assert output[1] == "Exiting CLI uploader."


def test_quoted_filename_survives_uploader_and_relay(tmp_path: Path, relay_client) -> None:
    image = tmp_path / 'say "hi".png'
    image.write_bytes(b"quoted")
    pinned: list[httpx.Request] = []

    def pinata(request: httpx.Request) -> httpx.Response:
        pinned.append(request)
        return httpx.Response(200, json={"IpfsHash": "QmQuote"})

    read_line, _ = _scripted([str(image), "exit"])
    output: list[str] = []

    with relay_client(pinata) as client:
        run_uploader("http://testserver", read_line=read_line, echo=output.append, client=client)

    assert b'filename="say \\"hi\\".png"' in pinned[0].content
    assert b"%22" not in pinned[0].content
    assert '"ipfs_url":"https://ipfs.io/ipfs/QmQuote"' in output[0]
