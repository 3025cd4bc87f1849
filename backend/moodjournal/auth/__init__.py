# Auth package init
