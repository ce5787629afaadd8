from kubectl_tekton.main import main

main()
