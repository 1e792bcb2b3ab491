"""
CLI - command line interface
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .api import (
    BuildError,
    CollectingProgress,
    CommitOptions,
    Container,
    Context,
    Docker,
    DockerException,
    Image,
)
from .settings import Settings

logger = logging.getLogger(__name__)


def parse_image_name(name: str):
    """Split 'repository[:tag]' into (repository, tag); tag defaults to latest"""
    if ':' in name.rsplit('/', 1)[-1]:
        repository, _, tag = name.rpartition(':')
        return repository, tag
    return name, 'latest'


class DockerRemoteCLI:
    """docker-remote CLI interface"""

    def __init__(self, docker: Docker):
        self.docker = docker

    def version(self):
        """Show client/server versions"""
        version = self.docker.get_version()
        print(f"{'Version:':<16} {version.get('Version', 'Unknown')}")
        print(f"{'API version:':<16} {version.get('ApiVersion', 'Unknown')}")
        print(f"{'OS/Arch:':<16} {version.get('Os', '?')}/{version.get('Arch', '?')}")

    def info(self):
        """Show system-wide information"""
        print(json.dumps(self.docker.get_info(), indent=2, sort_keys=True))

    def list_containers(self, all_containers: bool = False):
        """List containers"""
        containers = self.docker.containers.find_all(all=all_containers)

        if not containers:
            logger.info("No containers found")
            return

        print(f"{'NAME':<30} {'STATUS':<15} {'IMAGE':<40} {'ID':<15}")
        print("-" * 100)
        for c in containers:
            print(f"{c.name or '':<30} {c.status:<15} {c.image or '':<40} {c.short_id:<15}")

        print(f"\nTotal: {len(containers)}")

    def list_images(self, all_images: bool = False):
        """List images"""
        images = self.docker.images.find_all(all=all_images)

        if not images:
            logger.info("No images found")
            return

        print(f"{'REPOSITORY':<40} {'TAG':<20} {'ID':<15}")
        print("-" * 75)
        for image in images:
            print(f"{image.repository or '<none>':<40} {image.tag or '<none>':<20} {image.short_id:<15}")

        print(f"\nTotal: {len(images)}")

    def build(self, path: str, name: str, quiet: bool = False, no_cache: bool = False,
              rm: bool = False) -> bool:
        """Build image from a directory holding a Dockerfile"""
        progress = CollectingProgress()

        def show(event):
            progress.send(event)
            if event.get('stream'):
                print(event['stream'], end='' if event['stream'].endswith('\n') else '\n')

        logger.info(f"Building {name} from {path}...")
        response = self.docker.build(
            Context(path),
            name,
            progress=show,
            quiet=quiet,
            use_cache=not no_cache,
            remove_intermediate=rm,
        )

        if response.status_code != 200:
            logger.error(f"Build error: {response.text.strip()}")
            return False
        if progress.errors:
            raise BuildError(f"Build failed: {progress.errors[-1]}")

        logger.info(f"✓ Image {name} built")
        return True

    def commit(self, container_id: str, repo: Optional[str] = None, tag: Optional[str] = None,
               comment: Optional[str] = None, author: Optional[str] = None,
               run: Optional[str] = None) -> Image:
        """Commit container into a new image"""
        options = CommitOptions(
            repo=repo,
            tag=tag,
            comment=comment,
            author=author,
            run=json.loads(run) if run else None,
        )
        image = self.docker.commit(Container(id=container_id), options)
        logger.info(f"✓ Created image {image.id}")
        return image

    def pull(self, name: str, tag: Optional[str] = None) -> Image:
        """Pull image; an explicit tag wins over the one in name"""
        repository, name_tag = parse_image_name(name)
        tag = tag or name_tag

        def show(event):
            if event.get('status'):
                print(f"{event.get('id', ''):<15} {event['status']}")

        image = self.docker.images.pull(repository, tag=tag, progress=show)
        logger.info(f"✓ Pulled {image.name}")
        return image

    def remove_image(self, name: str, force: bool = False):
        """Remove image"""
        repository, tag = parse_image_name(name)
        for entry in self.docker.images.remove(Image(repository=repository, tag=tag), force=force):
            for action, ref in entry.items():
                print(f"{action}: {ref}")

    def remove_container(self, name: str, force: bool = False):
        """Remove container"""
        self.docker.containers.remove(Container(id=name), force=force)
        logger.info(f"✓ Container {name} removed")

    def show_logs(self, name: str, tail: int = 100):
        """Show container logs"""
        print(self.docker.containers.logs(Container(id=name), tail=str(tail)), end='')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='docker-remote',
        description='docker-remote - Docker Engine API client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Usage examples:
  %(prog)s version
  %(prog)s build --path ./app --name myapp:latest --rm
  %(prog)s commit --name my-container --repo myapp --tag snapshot
  %(prog)s ps --all
"""
    )

    parser.add_argument(
        'action',
        choices=[
            'version', 'info', 'build', 'commit', 'images', 'ps',
            'pull', 'rmi', 'rm', 'logs'
        ],
        help='Action'
    )

    parser.add_argument('--host', help='Docker host, e.g. unix:///var/run/docker.sock or tcp://host:2375')
    parser.add_argument('--name', help='Container or image name')

    # Build parameters
    parser.add_argument('--path', default='.', help='Build context directory (default: .)')
    parser.add_argument('--quiet', action='store_true', help='Suppress build output')
    parser.add_argument('--no-cache', action='store_true', help='Do not use cache when building')
    parser.add_argument('--rm', action='store_true', help='Remove intermediate containers')

    # Commit parameters
    parser.add_argument('--repo', help='Repository of the committed image')
    parser.add_argument('--tag', help='Tag of the committed or pulled image')
    parser.add_argument('--comment', help='Commit message')
    parser.add_argument('--author', help='Image author')
    parser.add_argument('--run', help='JSON container config applied to the committed image')

    parser.add_argument('--force', action='store_true', help='Force action')
    parser.add_argument('--tail', type=int, default=100, help='Number of log lines')
    parser.add_argument('--all', action='store_true', help='Show all containers or images')
    parser.add_argument('--debug', action='store_true', help='Log every request')

    return parser


def main(argv: Optional[List[str]] = None, docker: Optional[Docker] = None) -> int:
    """Start CLI application"""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    if args.host:
        settings.set('docker_host', args.host)

    level = 'DEBUG' if args.debug else settings.get('log_level', 'INFO')
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format='%(message)s')

    if args.action in ('build', 'commit', 'pull', 'rmi', 'rm', 'logs') and not args.name:
        parser.error(f"{args.action} requires --name")

    try:
        cli = DockerRemoteCLI(docker or Docker(settings=settings))
    except (DockerException, OSError, ValueError) as e:
        logger.error(f"Initialization error: {e}")
        return 1

    try:
        if args.action == 'version':
            cli.version()

        elif args.action == 'info':
            cli.info()

        elif args.action == 'build':
            if not cli.build(args.path, args.name, quiet=args.quiet, no_cache=args.no_cache, rm=args.rm):
                return 1

        elif args.action == 'commit':
            cli.commit(
                args.name,
                repo=args.repo,
                tag=args.tag,
                comment=args.comment,
                author=args.author,
                run=args.run
            )

        elif args.action == 'images':
            cli.list_images(all_images=args.all)

        elif args.action == 'ps':
            cli.list_containers(all_containers=args.all)

        elif args.action == 'pull':
            cli.pull(args.name, tag=args.tag)

        elif args.action == 'rmi':
            cli.remove_image(args.name, force=args.force)

        elif args.action == 'rm':
            cli.remove_container(args.name, force=args.force)

        elif args.action == 'logs':
            cli.show_logs(args.name, tail=args.tail)

    except KeyboardInterrupt:
        logger.info("\n\nInterrupted by user")
        return 130
    except (DockerException, OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
