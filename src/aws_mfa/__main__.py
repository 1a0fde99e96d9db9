from aws_mfa.cli import main

main()
