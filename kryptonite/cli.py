from typing import List

import typer

from . import aes, bip39, stream
from .config import setup_logging
from .errors import KryptoniteError

app = typer.Typer(add_completion=False, help="kryptonite: envelopes, authenticated streams and mnemonics")


def _hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise typer.BadParameter(f"{what} must be hex")


def _fail(exc: KryptoniteError):
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(log_level: str = typer.Option(None, "--log-level", help="Override KRYPTONITE_LOG_LEVEL")):
    setup_logging(log_level)


@app.command("mnemonic-encode")
def mnemonic_encode(entropy: str):
    """Print the mnemonic phrase for hex entropy."""
    try:
        typer.echo(bip39.from_entropy(_hex(entropy, "entropy")).words)
    except KryptoniteError as exc:
        _fail(exc)


@app.command("mnemonic-decode")
def mnemonic_decode(words: List[str]):
    """Print the hex entropy behind a mnemonic phrase."""
    try:
        typer.echo(bip39.to_entropy(" ".join(words)).data.hex())
    except KryptoniteError as exc:
        _fail(exc)


@app.command("mnemonic-generate")
def mnemonic_generate(size: int = typer.Argument(16, help="Entropy size in bytes")):
    try:
        typer.echo(bip39.generate(size).words)
    except KryptoniteError as exc:
        _fail(exc)


@app.command("aes-keygen")
def aes_keygen():
    typer.echo(aes.generate_key().hex())


@app.command("stream-encrypt")
def stream_encrypt(
    src: str,
    dst: str,
    key: str = typer.Option(..., help="AES key, hex"),
    iv: str = typer.Option(..., help="16-byte IV, hex"),
    ad: str = typer.Option(..., help="Associated data"),
):
    """Encrypt SRC into DST and print the authentication tag."""
    try:
        tag = stream.encrypt_file(src, dst, _hex(key, "key"), _hex(iv, "iv"), ad.encode("utf-8"))
    except KryptoniteError as exc:
        _fail(exc)
    typer.echo(tag.hex())


@app.command("stream-decrypt")
def stream_decrypt(
    src: str,
    dst: str,
    key: str = typer.Option(..., help="AES key, hex"),
    iv: str = typer.Option(..., help="16-byte IV, hex"),
    ad: str = typer.Option(..., help="Associated data"),
    tag: str = typer.Option(..., help="Authentication tag, hex"),
):
    """Authenticate SRC, then decrypt it into DST."""
    try:
        stream.decrypt_file(src, dst, _hex(key, "key"), _hex(iv, "iv"), ad.encode("utf-8"), _hex(tag, "tag"))
    except KryptoniteError as exc:
        _fail(exc)


def app_main():
    app()


if __name__ == "__main__":
    app_main()
