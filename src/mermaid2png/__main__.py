from mermaid2png.cli import main

main()
