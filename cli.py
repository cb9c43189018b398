# CLI 실행용
from appspider.enterprise.cli.runner import cli

if __name__ == "__main__":
    cli()
