from collections.abc import Callable

from settings.store import Settings, save_settings


def _ask_latency(ask: Callable[[str], str], prompt: str) -> int:
    while True:
        raw = ask(prompt).strip()
        if raw.isdigit():
            return int(raw)
        print("Latency must be a whole number of milliseconds")


def run_setup(chain: str, ask: Callable[[str], str] = input):
    print(f"Setting up merter for {chain}.")
    print("Latency is the spacing between requests in ms: 1000 / rate limit per second.")
    print("If you use your own node keep it behind a proxy that keeps connections alive.")

    settings = Settings(
        url_1=ask("Json-RPC url: ").strip(),
        latency_1=_ask_latency(ask, "Latency in ms for that url: "),
        url_2=ask("Fallback Json-RPC url (empty for none): ").strip(),
        latency_2=_ask_latency(ask, "Latency in ms for the fallback url: "),
        scan_key=ask("Etherscan/BscScan api key: ").strip(),
        mythx_key=ask("MythX api key: ").strip(),
        db_path=ask("Database path: ").strip(),
        file_path=ask("Path to store contracts: ").strip(),
    )
    path = save_settings(chain, settings)
    print(f"{path} written!")
    return path
