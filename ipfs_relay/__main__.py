from ipfs_relay.cli import app

app(prog_name="ipfs-relay")
